# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""docker-compose inside the box.

docker-compose cannot be pointed at a remote Windows engine the way
``docker run`` can, so it is installed in the box and run there by a
shell provisioner. The current directory is synced to ``C:/cwd``.
"""

import shlex
from pathlib import Path
from typing import Sequence

COMPOSE_DOWNLOAD_URL = (
    "https://github.com/docker/compose/releases/download/{version}/"
    "docker-compose-Windows-x86_64.exe"
)


def compose_command(cli_args: Sequence[str]) -> str:
    return shlex.join(["docker-compose", *cli_args])


def compose_trailer(cli_args: Sequence[str], cwd: Path, version: str = "1.26.0") -> str:
    """Vagrantfile snippet that installs docker-compose and runs it in ``/cwd``.

    The launch provisioner uses ``run: "always"`` so it also runs when a
    running box is reloaded.
    """
    command = compose_command(cli_args)
    url = COMPOSE_DOWNLOAD_URL.format(version=version)
    return f"""
## provision docker-compose installation
$dockerComposeProvisionScript = <<-SCRIPT

echo "Installing docker compose - this will take some minutes"

[Net.ServicePointManager]::SecurityProtocol=[Net.SecurityProtocolType]::Tls12
Invoke-WebRequest "{url}" -UseBasicParsing -OutFile "C:/Program Files/Docker/docker-compose.exe"

SCRIPT

## provision docker-compose command
$dockerComposeLaunch = <<-SCRIPT

cd C:/cwd/
echo {shlex.quote(command)}

{command}

SCRIPT

Vagrant.configure("2") do |config|
  config.vm.synced_folder "{cwd}", "/cwd", disabled: false
  config.vm.provision "shell", inline: $dockerComposeProvisionScript
  config.vm.provision :shell, :inline => $dockerComposeLaunch, run: "always"
end
"""
