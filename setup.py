import os
from setuptools import setup


src_version = os.path.join(os.path.dirname(__file__), "aocli", "version.py")
with open(src_version) as f:
    version = f.read().strip().split()[-1][1:-1]


setup(
    name="aocli",
    version=version,
    description="Read, download and submit Advent of Code puzzles from the terminal",
    long_description=open("README.rst").read(),
    long_description_content_type="text/x-rst",
    packages=["aocli"],
    entry_points={
        "console_scripts": [
            "aocli=aocli.cli:main",
        ],
    },
    license="MIT",
    url="https://github.com/aocli/aocli",
    classifiers=[
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Topic :: Software Development :: Libraries",
        "Topic :: Games/Entertainment :: Puzzle Games",
    ],
    python_requires=">=3.9",
    install_requires=[
        "beautifulsoup4",
        "urllib3",
        'colorama>=0.4.6; platform_system == "Windows"',
    ],
    extras_require={
        "test": [
            "pook",
            "pytest",
            "pytest-freezer",
            "pytest-mock",
            "pytest-raisin",
        ],
    },
)
