# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="chatlog",
    version="1.0.0",
    description="Daily rotating log files, crash reporting hooks and level-filtered logging for the chat client",
    author="chatlog maintainers",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["chatlog", "chatlog.*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests",  # Remote crash report delivery
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'chatlog=chatlog.main:main',  # Maintenance CLI (tail / purge / refresh / write)
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
