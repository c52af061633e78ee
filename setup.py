#!/usr/bin/env python

import re

from setuptools import setup


version = ''
with open('ossout/__init__.py', 'r') as fd:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                        fd.read(), re.MULTILINE).group(1)

if not version:
    raise RuntimeError('Cannot find version information')


with open('README.rst', 'rb') as f:
    readme = f.read().decode('utf-8')

setup(
    name='ossout',
    version=version,
    description='Writable stream backed by an OSS multipart upload',
    long_description=readme,
    packages=['ossout'],
    install_requires=['requests!=2.9.0',
                      'crcmod>=1.7'],
    extras_require={
        'test': ['mock', 'pytest'],
    },
    python_requires='>=3.6',
    include_package_data=True,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ]
)
