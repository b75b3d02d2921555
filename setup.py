from setuptools import setup

with open("fbxclient/version.py") as f:
    exec(f.read())

setup(
    name="python-fbxclient",
    version=__version__,  # type: ignore # noqa: F821
    description="Python API for pairing with and querying Freebox appliances",
    url="https://github.com/python-fbxclient/python-fbxclient",
    author="",
    author_email="",
    license="GPLv3",
    packages=["fbxclient", "fbxclient.cli"],
    install_requires=["aiohttp", "asyncclick", "mashumaro", "yarl"],
    extras_require={
        "speedups": ["orjson"],
        "shell": ["rich"],
        "test": ["pytest", "pytest-asyncio", "pytest-mock", "anyio"],
    },
    python_requires=">=3.11",
    entry_points={"console_scripts": ["fbx=fbxclient.cli.main:cli"]},
    zip_safe=False,
)
