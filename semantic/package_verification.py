#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Runtime dependency checks for build-semantic.

Minimum versions follow Ubuntu 24.04 LTS or what the code needs, whichever is higher.
Run ``python -m semantic.package_verification --check-all`` to list the status of every
runtime dependency.
"""

import sys
import logging
import argparse
from importlib.metadata import version, PackageNotFoundError
from typing import Dict, List, NamedTuple, Optional

from packaging.version import parse

from semantic.color_utils import Colors, colored, print_error, print_success
from semantic.constants import EXIT_RUNTIME_ERROR

logger = logging.getLogger(__name__)

PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "packaging": "24.0",
    "colorama": "0.4.6",
}


class PackageStatus(NamedTuple):
    """Installed state of one distribution against its minimum version."""

    name: str
    required: str
    installed: Optional[str]

    @property
    def is_installed(self) -> bool:
        return self.installed is not None

    @property
    def meets_version(self) -> bool:
        return self.installed is not None and parse(self.installed) >= parse(self.required)

    @property
    def install_hint(self) -> str:
        command = "pip install --upgrade" if self.is_installed else "pip install"
        return f"{command} '{self.name}>={self.required}'"


def package_status(package_name: str, min_version: Optional[str] = None) -> PackageStatus:
    """Look up the installed version of a distribution.

    Args:
        package_name: Distribution name on the package index
        min_version: Minimum version, defaults to the PACKAGE_REQUIREMENTS entry

    Returns:
        PackageStatus for the distribution

    Raises:
        ValueError: If no minimum version is given or registered
    """
    required = min_version if min_version is not None else PACKAGE_REQUIREMENTS.get(package_name)
    if required is None:
        raise ValueError(f"No version requirement specified for {package_name}")

    try:
        installed: Optional[str] = version(package_name)
    except PackageNotFoundError:
        installed = None
    logger.debug("%s: installed %s, required >=%s", package_name, installed, required)
    return PackageStatus(package_name, required, installed)


def require_package(package_name: str, context: str = "this tool") -> None:
    """Exit with install instructions unless a registered package is usable.

    Args:
        package_name: Distribution name, must be in PACKAGE_REQUIREMENTS
        context: What needs the package (e.g., "colored output")

    Exits:
        With EXIT_RUNTIME_ERROR (2) if the package is unknown, missing or too old
    """
    if package_name not in PACKAGE_REQUIREMENTS:
        print_error(f"Unknown package '{package_name}' has no version requirement")
        sys.exit(EXIT_RUNTIME_ERROR)

    status = package_status(package_name)
    if status.meets_version:
        return

    if status.is_installed:
        print_error(f"{package_name} {status.installed} is too old for {context}, version >={status.required} is required.")
    else:
        print_error(f"{package_name} is required for {context}.")
    print(f"Install with: {status.install_hint}", file=sys.stderr)
    sys.exit(EXIT_RUNTIME_ERROR)


def check_all_packages() -> bool:
    """Print the status of every registered package.

    Returns:
        True if every package is installed and new enough
    """
    print(f"{Colors.BRIGHT}build-semantic Package Verification{Colors.RESET}")
    statuses: List[PackageStatus] = [package_status(name) for name in PACKAGE_REQUIREMENTS]

    width = max(len(status.name) for status in statuses)
    for status in statuses:
        if status.meets_version:
            state = colored(status.installed or "", Colors.GREEN)
        elif status.is_installed:
            state = colored(f"{status.installed} (need >={status.required})", Colors.RED)
        else:
            state = colored("not installed", Colors.RED)
        print(f"  {status.name.ljust(width)}  {state}")

    missing = [status for status in statuses if not status.meets_version]
    if not missing:
        print_success("All required packages are available")
        return True

    print_error("Some required packages are missing or too old")
    print("  pip install " + " ".join(f"'{status.name}>={status.required}'" for status in missing), file=sys.stderr)
    return False


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point.

    Returns:
        0 when all packages are usable or no check was requested, 1 otherwise
    """
    parser = argparse.ArgumentParser(description="Verify build-semantic package dependencies")
    parser.add_argument("--check-all", action="store_true", help="Check all known runtime packages")
    args = parser.parse_args(argv)

    if not args.check_all:
        parser.print_help()
        return 0
    return 0 if check_all_packages() else 1


if __name__ == "__main__":
    sys.exit(main())
