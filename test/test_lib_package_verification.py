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
"""Tests for semantic/package_verification.py."""

from importlib.metadata import PackageNotFoundError
from typing import Any
from unittest.mock import patch

import pytest
from packaging.version import parse

from semantic.constants import EXIT_RUNTIME_ERROR
from semantic.package_verification import (
    PACKAGE_REQUIREMENTS,
    PackageStatus,
    check_all_packages,
    main,
    package_status,
    require_package,
)


def _not_installed(name: str) -> str:
    raise PackageNotFoundError(name)


@pytest.mark.unit
class TestPackageStatus:
    """Tests for package_status and PackageStatus."""

    def test_installed_runtime_dependency(self) -> None:
        """Test that colorama is found and new enough."""
        status = package_status("colorama")

        assert status.is_installed
        assert status.meets_version
        assert status.required == PACKAGE_REQUIREMENTS["colorama"]

    def test_explicit_minimum_too_new(self) -> None:
        """Test an installed package below an explicit minimum."""
        status = package_status("packaging", "999.0.0")

        assert status.is_installed
        assert not status.meets_version
        assert status.install_hint == "pip install --upgrade 'packaging>=999.0.0'"

    def test_not_installed(self) -> None:
        """Test a distribution that does not exist."""
        status = package_status("nonexistent_package_xyz123", "1.0.0")

        assert status == PackageStatus("nonexistent_package_xyz123", "1.0.0", None)
        assert not status.meets_version
        assert status.install_hint == "pip install 'nonexistent_package_xyz123>=1.0.0'"

    def test_unregistered_without_minimum(self) -> None:
        """Test that a package needs a minimum version from somewhere."""
        with pytest.raises(ValueError, match="No version requirement specified"):
            package_status("unknown_pkg_xyz")

    def test_version_comparison_is_numeric(self) -> None:
        """Test that 0.10 is newer than 0.9."""
        assert PackageStatus("x", "0.9", "0.10").meets_version


@pytest.mark.unit
class TestRequirePackage:
    """Tests for require_package."""

    def test_usable_package_returns(self) -> None:
        """Test that an installed package passes silently."""
        require_package("colorama", "colored output")

    def test_unknown_package_exits(self, capsys: Any) -> None:
        """Test a package missing from the registry."""
        with pytest.raises(SystemExit) as exc_info:
            require_package("unknown_package_not_in_registry")

        assert exc_info.value.code == EXIT_RUNTIME_ERROR
        assert "Unknown package 'unknown_package_not_in_registry'" in capsys.readouterr().err

    def test_old_version_exits(self, capsys: Any) -> None:
        """Test an installed package below the registered minimum."""
        with patch.dict(PACKAGE_REQUIREMENTS, {"colorama": "999.0.0"}):
            with pytest.raises(SystemExit) as exc_info:
                require_package("colorama", "colored output")

        err = capsys.readouterr().err
        assert exc_info.value.code == EXIT_RUNTIME_ERROR
        assert "is too old for colored output" in err
        assert "pip install --upgrade 'colorama>=999.0.0'" in err

    def test_missing_package_exits(self, capsys: Any) -> None:
        """Test a registered package that is not installed."""
        with patch.dict(PACKAGE_REQUIREMENTS, {"nonexistent_package_xyz123": "1.0"}):
            with pytest.raises(SystemExit):
                require_package("nonexistent_package_xyz123", "test feature")

        assert "is required for test feature" in capsys.readouterr().err


@pytest.mark.unit
class TestCheckAllPackages:
    """Tests for check_all_packages."""

    def test_all_available(self, capsys: Any) -> None:
        """Test the report when every package is usable."""
        assert check_all_packages() is True

        out = capsys.readouterr().out
        assert "build-semantic Package Verification" in out
        assert "colorama" in out
        assert "All required packages are available" in out

    def test_missing_package(self, capsys: Any) -> None:
        """Test the report when nothing is installed."""
        with patch("semantic.package_verification.version", side_effect=_not_installed):
            assert check_all_packages() is False

        captured = capsys.readouterr()
        assert "not installed" in captured.out
        assert "Some required packages are missing or too old" in captured.err
        assert "pip install 'packaging>=24.0' 'colorama>=0.4.6'" in captured.err

    def test_old_version(self, capsys: Any) -> None:
        """Test the report when a package is too old."""
        with patch("semantic.package_verification.version", return_value="0.1.0"):
            assert check_all_packages() is False

        assert "(need >=0.4.6)" in capsys.readouterr().out


@pytest.mark.unit
class TestRequirements:
    """Tests for the requirement registry."""

    def test_runtime_dependencies(self) -> None:
        assert set(PACKAGE_REQUIREMENTS) == {"packaging", "colorama"}

    def test_versions_parse(self) -> None:
        for ver_str in PACKAGE_REQUIREMENTS.values():
            assert parse(ver_str).release


@pytest.mark.unit
class TestMain:
    """Tests for the command line entry point."""

    def test_check_all(self, capsys: Any) -> None:
        assert main(["--check-all"]) == 0
        assert "build-semantic Package Verification" in capsys.readouterr().out

    def test_check_all_failure(self) -> None:
        with patch("semantic.package_verification.check_all_packages", return_value=False):
            assert main(["--check-all"]) == 1

    def test_no_args_prints_help(self, capsys: Any) -> None:
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out
