#!/usr/bin/env python

from setuptools import setup, find_namespace_packages

setup(
    name="padcast-mdns",
    version="1.0.0",
    description="mDNS advertisement of the PadCast AirPlay receiver",
    packages=find_namespace_packages("src", include=["padcast.*"]),
    package_data={"": ["py.typed"]},
    python_requires=">=3.10",
    install_requires=("psutil<7.2", "rich"),
    extras_require={
        "test": ("pytest", "pytest-timeout", "mock", "dnslib"),
    },
    entry_points={
        "console_scripts": ["padcast-mdns=padcast.mdns.cli:main"],
    },
    package_dir={"": "src"},
)
