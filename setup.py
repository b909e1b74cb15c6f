from setuptools import setup, find_packages

setup(
    name="bdrss",
    version="0.1.0",
    description="bdnews24 Opinion - RSS Feed Generator",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "beautifulsoup4>=4.10.0",
        "requests>=2.25.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bdrss=bdrss.cli:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
