[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bloodhorn"
version = "1.0.0"
description = "Boot manager toolkit: configuration parsing, a boot menu model, FAT32/ext2/ISO 9660 readers, network boot packets, signature checks and a rescue shell"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "bootloader",
    "boot menu",
    "fat32",
    "ext2",
    "iso9660",
    "pxe",
    "dhcp",
    "tftp",
    "arp",
    "secure boot",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Boot",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
bloodhorn = "bloodhorn.app:main"
bloodhorn-shell = "bloodhorn.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["bloodhorn"]

[tool.pytest.ini_options]
addopts = "-ra"
