from setuptools import setup, find_packages

setup(
    name="namewarden",
    version="0.1.0",
    description="A Discord bot that auto-bans look-alikes of high-ranking members",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord",
        "aiosqlite",
        "PyYAML",
        "python-dotenv",
        "prompt_toolkit",
        "regex",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    entry_points={
        "console_scripts": [
            "namewarden=namewarden.main:main",
        ],
    },
)
