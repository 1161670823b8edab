#!/usr/bin/env python
from setuptools import (
    find_packages,
    setup,
)

description = "py-ipns: IPNS record creation, encoding and validation"

extras_require = {
    "dev": [
        "build>=0.9.0",
        "mypy==1.10.0",
        "mypy-protobuf>=3.0.0",
        "pre-commit>=3.4.0",
        "tox>=4.0.0",
        "twine",
        "wheel",
    ],
    "test": [
        "pytest>=7.0.0",
        "pytest-xdist>=2.4.0",
    ],
}

extras_require["dev"] = extras_require["dev"] + extras_require["test"]

try:
    with open("./README.md", encoding="utf-8") as readme:
        long_description = readme.read()
except FileNotFoundError:
    long_description = description

install_requires = [
    "base58>=1.0.3",
    "cbor2>=5.4.0",
    "coincurve>=10.0.0",
    "protobuf>=6.30.1",
    "pycryptodome>=3.9.2",
    "pymultihash>=0.8.2",
    "pynacl>=1.3.0",
]

setup(
    name="py-ipns",
    version="0.1.0",
    description=description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    include_package_data=True,
    install_requires=install_requires,
    python_requires=">=3.10, <4",
    extras_require=extras_require,
    license="MIT AND Apache-2.0",
    zip_safe=False,
    keywords="ipns ipfs libp2p",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"ipns": ["py.typed", "**/*.proto", "**/*.pyi"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    platforms=["unix", "linux", "osx", "win32"],
)
