import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="type_graph_schema",
    version="1.0.1",
    description="Generate JSON Schema and LLM function-calling schemas from Python types via a type graph",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Intended Audience :: Developers",
    ],
    keywords="json schema function calling llm tools dataclass type graph",
    url="https://github.com/madlag/type_graph_schema",
    author="François Lagunas",
    author_email="francois.lagunas@gmail.com",
    license="MIT",
    packages=find_packages(include=["type_graph_schema", "type_graph_schema.*"]),
    python_requires=">=3.12",
    install_requires=[
        "click>=8.0.0",
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
            "type_graph_schema=type_graph_schema.cli:type_graph_schema",
        ],
    },
    include_package_data=True,
    package_data={
        "type_graph_schema": ["tests/test_data/*.json"],
    },
    zip_safe=False,
)
