from setuptools import setup, find_packages

setup(
    name='config-guardian',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',

    install_requires=[
        'watchdog>=5',
        'python-dotenv',
        'blake3',
        'pydantic>=2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    # snapshot / compare / monitor entry point
    entry_points={
        'console_scripts': [
            'config-guardian = config_guardian.cli:main',
        ],
    },
    author='Harpreet Singh',
    description='Config Guardian - configuration drift detection for a directory of files',
    license='unliscensed',
)
