from setuptools import setup, find_packages
import re

# Read version from taxgenie/__init__.py
with open('taxgenie/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='taxgenie',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'taxgenie.sdk.taxes': ['data/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tax-genie=taxgenie.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Income tax estimates with 401(k)/HSA savings tips.',
    python_requires='>=3.10',
)
