"""Packaging for filekit (src/ layout, console script `filekit`)."""

from setuptools import find_packages, setup

setup(
    name="filekit",
    version="0.1.0",
    description="Asyncio filesystem helpers, a debounced watcher and an interactive JSON config loader",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
        "inotify_simple>=1.3; sys_platform == 'linux'",
    ],
    extras_require={
        "test": ["pytest>=8"],
    },
    entry_points={
        "console_scripts": ["filekit = filekit.cli:cli"],
    },
)
