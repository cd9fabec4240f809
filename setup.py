from pathlib import Path

import setuptools

this_directory = Path(__file__).parent
long_description = (this_directory / "README.rst").read_text()

test_dependencies = ["pytest", "pandas"]


setuptools.setup(
    name="bubbleset",
    version="0.1.0",
    description="Placement of data records inside the regions of area-proportional Euler diagrams.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=["bubbleset"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    keywords="venn euler diagram sets visualization circle packing force layout",
    install_requires=[
        "numpy>=1.18",
        "scipy",
        "matplotlib",
        "tqdm",
        "typer",
    ],
    test_suite="pytest",
    tests_require=test_dependencies,
    extras_require={"test": test_dependencies},
)
