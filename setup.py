import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="gen_orb_mcp",
    version="0.1.0",
    description="Generate MCP servers exposing CircleCI orb commands, jobs and executors as resources",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Software Development :: Build Tools",
        "Intended Audience :: Developers",
    ],
    keywords="circleci orb mcp model context protocol code generation",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mcp>=1.3.0,<2",
        ],
    },
    entry_points={
        "console_scripts": [
            "gen-orb-mcp=gen_orb_mcp.gen_orb_mcp:cli",
        ],
    },
    include_package_data=True,
    package_data={
        "gen_orb_mcp": ["templates/*.jinja2"],
    },
    zip_safe=False,
)
