from setuptools import find_namespace_packages, setup

setup(
    name="tscodegen",
    packages=find_namespace_packages(include=["tscodegen", "tscodegen.*"]),
    version="0.1.0",
    description=(
        "Генератор TypeScript клиента (типы, zod, сервисы, хуки, формы, моки)"
        " из OpenAPI спецификаций"
    ),
    author="lite",
    license="MIT",
    install_requires=[
        "jsonref>=1.0.0",
        "aiohttp>=3.9.0",
        "pydantic>=2.0.0",
        "toml>=0.10.0",
        "httpx>=0.24.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "jsonschema>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "jsonschema>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tscodegen = tscodegen.cli:main",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
