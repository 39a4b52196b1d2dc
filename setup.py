
from setuptools import setup, find_packages

setup(
    name="intervaltools",
    version="0.1.0",
    author="Zi-Hao Huang",
    author_email="zh384@cam.ac.uk",
    description="BED to interval list conversion and related genomics utilities",
    long_description="Command-line tools for building sorted, merged interval lists from BED files against a sequence dictionary, comparing metrics files and loading targeted-assay intervals",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
    'biopython>=1.83',
    'pandas>=2.0.3',
    'pysam>=0.22.0',
    'click>=8.1',
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "intervaltools=intervaltools.cli.main:cli",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: CC BY-NC 4.0",
        "Operating System :: OS Independent",
    ],
    license="Creative Commons Attribution-NonCommercial 4.0",
    )
