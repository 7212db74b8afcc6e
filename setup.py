# setup.py
from setuptools import setup, find_packages

setup(
    name="zipsync",
    version="1.0.0",
    description="Safe recursive archive extraction with directory tree reporting and object store upload",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "boto3",     # S3 backend
        "botocore",  # client timeouts and exceptions
        "requests",  # HTTP backend
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'zipsync=zipsync.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
