from setuptools import setup, find_packages

setup(
    name="cbinfo",
    version="0.1.0",
    description="CellBlender viz file reader with spatial uniformity analysis",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "numpy",
        "matplotlib",
        "pyyaml",
        "tqdm",
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'cbinfo=cbinfo.cli:main',
        ],
    },
    python_requires=">=3.8",
)
