from setuptools import setup, find_packages

import re
import os

this_directory = os.path.abspath(os.path.dirname(__file__))
__version__ = re.findall(
    r"""__version__ = ["']+([0-9\.]*)["']+""",
    open(os.path.join(this_directory, "ltibox/version.py")).read(),
)[0]

with open(os.path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="ltibox",
    version=__version__,
    description="""ltibox is the algebra of linear time invariant systems:
    state-space and transfer function models, conversion between them and
    their interconnection in series, parallel, feedback and block form.""",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="linear systems state-space transfer function control",
    author="",
    author_email="",
    license="BSD 3-Clause License",
    packages=find_packages(
        where='./',
        include=['ltibox*'],
        exclude=['tests']
        ),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "scipy",
        "configobj",
        "colorama",
    ],
    extras_require={
        "test": [
            "pytest",
            "control",
                 ],
    },
    classifiers=[
        "Operating System :: Linux, Mac OS",
        "Programming Language :: Python",
        ],
)
