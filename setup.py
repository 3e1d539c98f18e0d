from setuptools import setup, find_packages

setup(
    name="ring_to_tv",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"ring_to_tv": ["assets/*.png"]},
    install_requires=[
        "httpx>=0.24.0",
        "aiofiles>=23.1.0",
        "pydantic>=2.11",
        "pytz>=2023.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "respx>=0.20.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ring-to-tv=ring_to_tv.__main__:main_entry",
        ],
    },
    python_requires=">=3.9",
    description="Shows Ring camera events with snapshots as popups on Android TV via PiPup",
    keywords="ring, doorbell, camera, android tv, pipup, notifications",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
