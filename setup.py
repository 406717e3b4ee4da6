"""
Setup file.
"""

from setuptools import find_packages, setup

URL = "https://github.com/eepl/eepl-tasks"
KEYWORDS = "embedded eec toolchain firmware microcontroller build pipeline tasks"


if __name__ == "__main__":
    setup(
        name="eepl-tasks",
        version="0.1.0",
        description="Build pipeline synthesis for the eec embedded toolchain",
        keywords=KEYWORDS,
        url=URL,
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.9",
        install_requires=[],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["eepl=eepl.cli:main"]},
    )
