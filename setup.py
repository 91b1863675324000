#!/usr/bin/env python
from setuptools import setup, find_packages
import os
import re

# Read the version from __init__.py
with open(os.path.join('quarto_ai', '__init__.py'), 'r') as f:
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", f.read(), re.M)
    if version_match:
        version = version_match.group(1)
    else:
        version = '0.1.0'  # Default if not found

# Read long description from README.md
with open('README.md', 'r', encoding='utf-8') as f:
    long_description = f.read()

# Core dependencies
install_requires = [
    'loguru>=0.7.0,<1.0.0',  # Logging
    'rich>=12.0.0,<15.0.0',  # Beautiful terminal output
    'tqdm>=4.64.0,<5.0.0',  # Progress bars
]

# Development dependencies
dev_requires = [
    'pytest>=7.0.0,<10.0.0',  # Testing framework
    'pytest-cov>=4.0.0,<8.0.0',  # Test coverage
    'mypy>=1.0.0,<2.0.0',  # Static type checking
    'black>=23.0.0,<27.0.0',  # Code formatting
    'isort>=5.10.0,<8.0.0',  # Import sorting
]

setup(
    name='quarto-ai',
    version=version,
    description='Rules engine and Monte Carlo opponent for the board game Quarto',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Quarto AI Team',
    packages=find_packages(include=['quarto_ai', 'quarto_ai.*']),
    install_requires=install_requires,
    extras_require={
        'dev': dev_requires,
        'all': dev_requires,
    },
    entry_points={
        'console_scripts': [
            'quarto-play=quarto_ai.play:main',
            'quarto-simulate=quarto_ai.simulate:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Topic :: Games/Entertainment :: Board Games',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
    ],
    python_requires='>=3.9',
    include_package_data=True,
    keywords='quarto, board game, ai, monte carlo, rollouts',
)
