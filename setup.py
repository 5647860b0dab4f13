from setuptools import setup, find_packages

setup(
    name="file-contexts-gen",
    version="0.1.0",
    description="Autogenerate missing SELinux file_contexts entries for extracted Android partitions",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        line.strip()
        for line in open("requirements.txt")
        if line.strip() and not line.startswith("#")
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "file-contexts-gen=file_contexts_gen.cli:main",
        ],
    },
)
