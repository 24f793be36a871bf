""" bip32kit build script for setuptools.

"""

import re

from setuptools import find_packages, setup  # type: ignore

# bip32kit/__init__.py imports runtime dependencies: read, do not import
with open("bip32kit/__init__.py", "r", encoding="ascii") as file_:
    metadata = dict(re.findall(r'^(\w+) = "([^"]*)"$', file_.read(), re.MULTILINE))

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=metadata["name"],
    version=metadata["__version__"],
    url="https://github.com/bip32kit/bip32kit",
    project_urls={
        "Download": "https://github.com/bip32kit/bip32kit/releases",
        "GitHub": "https://github.com/bip32kit/bip32kit",
        "Issues": "https://github.com/bip32kit/bip32kit/issues",
    },
    license=metadata["__license__"],
    author=metadata["__author__"],
    author_email=metadata["__author_email__"],
    description="BIP32 hierarchical deterministic extended keys",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"bip32kit": ["_data/*.json"]},
    include_package_data=True,
    install_requires=[
        "coincurve",
        "dataclasses-json",
        "loguru",
        "pycryptodome",
    ],
    extras_require={
        "secp256k1": ["btclib_libsecp256k1"],
        "test": ["pytest"],
    },
    keywords="bitcoin bip32 hd-wallet extended-keys slip132 base58 secp256k1",
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
