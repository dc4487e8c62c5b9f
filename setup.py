from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="jws-jcs-verifier",
    version="0.1.0",
    author="JWS/JCS Project",
    description="Verification of JSON objects signed with an embedded detached JWS over RFC 8785 canonical JSON",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["jws_jcs", "jws_jcs.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Security",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.9",
    install_requires=[
        "cryptography>=42.0.0",
        "PyJWT[crypto]>=2.8.0",
        "pydantic>=2.4.0",
        "click>=8.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.7.0",
            "mypy>=1.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "jws-jcs=jws_jcs.cli.main:cli",
        ],
    },
)
