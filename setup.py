#!/usr/bin/env python
# -*- coding: utf-8 -*-
import io
import re
from os.path import dirname
from os.path import join

from setuptools import setup
from setuptools import find_packages

requirements = [
    'pyyaml>=3.11',
]


test_requirements = [
    'pytest',
]


def read(*names, **kwargs):
    return io.open(
        join(dirname(__file__), *names),
        encoding=kwargs.get('encoding', 'utf8')
    ).read()


def get_version():
    match = re.search(r"^__version__ = '([^']+)'", read('src', 'seqparse', '__init__.py'), re.M)
    if not match:
        raise RuntimeError("Couldn't find __version__ in src/seqparse/__init__.py")
    return match.group(1)


setup(
    name='seqparse',
    version=get_version(),
    description='Finds sequences of numbered files and expands frame/view patterns into filenames',
    license="MIT",
    packages=find_packages('src'),
    package_dir={'': 'src'},
    package_data={},
    include_package_data=True,
    python_requires='>=3.6',
    # Requirements
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    zip_safe=False,
    keywords=[
        'sequence', 'image sequence', 'frame', 'padding', 'vfx',
    ],
)
