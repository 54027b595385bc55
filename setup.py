# -*- coding: utf-8; -*-

import io
import os

from setuptools import setup


metadata = {}
with io.open(os.path.join('formwire', '__metadata__.py'), 'rb') as f:
    exec(f.read(), metadata)            # pylint: disable=exec-used

with io.open('README.rst') as f:
    long_description = f.read()

setup(
    name='formwire',
    version=metadata['version'],
    description='Content-Disposition and Content-Type parsing '
                'and multipart/form-data bodies',
    long_description=long_description,
    url=metadata['homepage'],
    license='MIT',

    python_requires='>=3.8',
    install_requires=[
        'bitstring >= 3.1.4',
    ],
    extras_require={
        'test': [
            'pytest >= 6.0',
        ],
    },

    packages=[
        'formwire',
        'formwire.syntax',
        'formwire.util',
    ],
    entry_points={
        'console_scripts': [
            'formwire=formwire.cli:main',
        ],
    },
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Topic :: Internet :: WWW/HTTP',
    ],
    keywords='HTTP Content-Disposition Content-Type multipart form-data '
             'RFC 6266 RFC 5987 RFC 7578 parser',
)
