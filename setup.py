from setuptools import setup, find_packages


setup(
    name="tinyalu",
    version="0.1",
    description="A 16-bit ALU with a byte-serial load interface",
    license="BSD",
    python_requires=">=3.8",
    install_requires=["amaranth>=0.5,<0.6"],
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "tinyalu = tinyalu.cli:main",
        ],
    },
)
