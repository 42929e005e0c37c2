"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/teapot-build/teapot"
KEYWORDS = "c build-system compiler toolchain static-library package-manager"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="teapot",
        version="0.1.0",
        description="Build system and package layout for native C packages",
        keywords=KEYWORDS,
        url=URL,
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.11",
        install_requires=[
            "tqdm",
            "psutil",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": [
                "tea=teapot.cli:main",
            ],
        },
        include_package_data=True)
