# setup.py

from setuptools import setup, find_packages

setup(
    name='automatic-sub-aligner',
    version='1.0.0',
    description='Delay, gain and polarity alignment of multiple subwoofers at one listening position',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
        'matplotlib',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'auto-sub-aligner=automatic_sub_aligner.cli.__main__:main',
        ],
    },
)
