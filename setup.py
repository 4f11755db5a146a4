from setuptools import setup, find_packages

setup(
    name="zeitgeist",
    version="0.1.0",
    description="Zeitgeist - topic discovery across news feeds",
    author="Zeitgeist contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "zeitgeist": ["data/*.txt"],
    },
    install_requires=[
        "aiohttp>=3.8.0",
        "async-timeout>=4.0.0",
        "backoff>=1.11.0",
        "beautifulsoup4>=4.10.0",
        "feedparser>=6.0.0",
        "mistune>=2.0.0",
        "nltk>=3.8",
        "numpy>=1.21.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "tqdm>=4.62.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "zeitgeist=zeitgeist.cli:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Processing :: Linguistic",
    ],
)
