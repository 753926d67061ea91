from setuptools import setup, find_packages

setup(
    name="html-rubric-grader",
    version="0.1.0",
    description="Grades a single HTML submission against a fixed rubric and writes a markdown score report",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    py_modules=["cli", "pipeline_runner"],
    package_data={"config": ["grader_config.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "beautifulsoup4>=4.12",
        "structlog>=23.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "html-grader=cli:main",
        ],
    },
)
