#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/utils/dependencies.py
"""Runtime requirements of optional mdxslate components.

The MDX parser imports mistune lazily, so that the tree transducer and the
JSX helpers work without it. Each lazily imported package is described by a
:class:`Requirement`; :func:`check_requirements` inspects a group of them and
raises a single :class:`~mdxslate.exceptions.DependencyError` describing every
problem found.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from importlib import metadata
from typing import Iterable, Optional

from packaging import version
from packaging.specifiers import InvalidSpecifier, SpecifierSet

from mdxslate.exceptions import DependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requirement:
    """A package a component imports at call time.

    Parameters
    ----------
    install_name : str
        Distribution name used by pip and by ``importlib.metadata``
    import_name : str
        Module name passed to ``import``
    version_spec : str, default ""
        PEP 440 specifier such as ``">=3.0.0"``; empty accepts any version

    """

    install_name: str
    import_name: str
    version_spec: str = ""

    def installed_version(self) -> Optional[str]:
        """Return the installed distribution version, or None if not installed."""
        try:
            return metadata.version(self.install_name)
        except metadata.PackageNotFoundError:
            return None

    def version_satisfied(self) -> tuple[bool, Optional[str]]:
        """Check the installed version against :attr:`version_spec`.

        Returns
        -------
        tuple
            ``(meets_requirement, installed_version)``; a distribution that is
            not installed never meets a requirement

        """
        installed = self.installed_version()
        if not self.version_spec:
            return installed is not None, installed
        if installed is None:
            return False, None
        try:
            spec = SpecifierSet(self.version_spec)
        except InvalidSpecifier:
            logger.warning("Ignoring invalid version specifier %r for %s", self.version_spec, self.install_name)
            return True, installed
        return version.parse(installed) in spec, installed


def check_requirements(component: str, requirements: Iterable[Requirement]) -> None:
    """Verify that every requirement is importable and recent enough.

    Parameters
    ----------
    component : str
        Name of the component needing the packages (e.g., ``"mdx"``); used in
        the error message
    requirements : iterable of Requirement
        Packages to check

    Raises
    ------
    DependencyError
        If any package is missing or has an incompatible version. The first
        ImportError is chained as the cause.

    """
    missing: list[tuple[str, str]] = []
    version_mismatches: list[tuple[str, str, str]] = []
    original_error: Optional[ImportError] = None

    for requirement in requirements:
        try:
            importlib.import_module(requirement.import_name)
        except ImportError as e:
            missing.append((requirement.install_name, requirement.version_spec))
            if original_error is None:
                original_error = e
            continue

        if requirement.version_spec:
            meets, installed = requirement.version_satisfied()
            if not meets:
                version_mismatches.append((requirement.install_name, requirement.version_spec, installed or "unknown"))

    if missing or version_mismatches:
        raise DependencyError(
            converter_name=component,
            missing_packages=missing,
            version_mismatches=version_mismatches,
            original_import_error=original_error,
        ) from original_error
