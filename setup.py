from setuptools import setup, find_packages

setup(
    name="litminer",
    version="0.1.0",
    packages=find_packages(),
    include_package_data=True,
    package_data={"litminer": ["fdata/*.json"]},
    python_requires='>=3.8',
    install_requires=[
        'rich>=10.0.0',
        'pyyaml>=6.0.0',
        'chardet>=5.0.0',
        'requests>=2.28.0',
        'urllib3>=1.26.0',
        'numpy>=1.22.0',
        'scipy>=1.9.0',
        'scikit-learn>=1.3.0',
        'nltk>=3.8.0',
        'textblob>=0.17.0',
        'plotly>=5.0.0',
        'matplotlib>=3.7.0',
        'wordcloud>=1.9.0',
    ],
    extras_require={
        'dev': [
            'black>=23.0.0',
            'isort>=5.12.0',
            'flake8>=6.0.0',
            'pytest>=7.0.0',
            'pytest-timeout>=2.1.0',
            'pytest-cov>=4.1.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'litminer=litminer.cli.main:main',
        ],
    },
)
