"""A setup tools based setup module.
"""

import setuptools


_ABOUT = {}

exec(open('iduntool/__about__.py').read(), _ABOUT)


setuptools.setup(
    name=_ABOUT['APP_NAME'],
    version=_ABOUT['VERSION'],
    description=_ABOUT['DESCRIPTION'],
    long_description=_ABOUT['LONG_DESCRIPTION'],
    author=_ABOUT['AUTHOR'],
    license=_ABOUT['LICENSE'],
    keywords=_ABOUT['KEYWORDS'],

    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        'Development Status :: 3 - Alpha',
        'Intended Audience :: End Users/Desktop',
        'Environment :: Console',
        'Topic :: System :: Emulators',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
    ],

    python_requires='>=3.9',

    packages=[
        'iduntool',
    ],

    install_requires=[
        'psutil (>=5.0)'
    ],

    entry_points={
        'console_scripts': [
            'iduntool=iduntool.iduntool:main',
        ],
    },
)
