from setuptools import find_packages, setup

setup(
    name='local-cli',
    version='1.0.0',
    description='Jump into the shell, database or WP-CLI of sites managed by Local',
    python_requires='>=3.8',
    packages=find_packages(include=['localcli', 'localcli.*']),
    install_requires=[
        'textual>=0.48',
        'rich',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'local-cli=localcli.main:main',
        ],
    },
)
