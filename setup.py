import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="helm_values_schema",
    version="0.1.0",
    description="Generate a JSON Schema for Helm values files from their values and annotated comments",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: System :: Systems Administration",
        "Intended Audience :: Developers",
    ],
    keywords="helm values json schema kubernetes yaml generator",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "PyYAML>=6.0",
        "requests>=2.28.0",
        "jsonpointer>=2.3",
        "jsonschema>=4.17.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "helm_values_schema=helm_values_schema.helm_values_schema:helm_values_schema",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
