from setuptools import setup, find_namespace_packages

setup(
    name="site-publish",
    version="0.1.0",
    packages=find_namespace_packages(include=["src", "src.*"], exclude=["src.tests", "src.tests.*"]),
    install_requires=[
        "boto3",
        "botocore",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "moto[s3]>=5",
        ],
    },
    author="ecaa",
    description="CodePipeline action that publishes a build artifact to an S3 static website",
    python_requires='>=3.9',
)
