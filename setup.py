from setuptools import setup, find_packages

setup(
    name="asset-pipeline",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"asset_pipeline": ["config/*.yaml"]},
    python_requires=">=3.8",
    install_requires=[
        "Pillow",
        "lxml",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "asset-pipeline=asset_pipeline.main:main",
        ],
    },
)
