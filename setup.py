from setuptools import setup, find_packages

setup(
    name="dd-license-notice",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "giturlparse",
        "packaging",
        "pytz",
        "requests",
        "scancode-toolkit",
        "sqlalchemy>=2.0",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "pytest-mock",
            "mypy",
            "black",
            "types-pytz",
            "types-requests",
        ],
    },
    entry_points={
        "console_scripts": [
            "dd-license-notice=dd_license_notice.cli.main_cli:app",
        ],
    },
    author="Datadog",
    description="Scan the dependencies of a project and aggregate their licenses and copyrights into a notice",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/DataDog/dd-license-notice",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
