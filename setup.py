from setuptools import setup, find_packages

setup(
    name="vecgen",
    version="1.0.0",
    description="Procedural SVG pattern generator",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"vecgen": ["data/*.json"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.24",
        "svgwrite>=1.4",
        "flask>=2.0",
        "flask-cors>=3.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "vecgen=vecgen.cli:main",
            "vecgen-web=vecgen.web.__main__:main",
        ],
    },
)
