from setuptools import setup, find_packages

# Basic information
VERSION = '0.1.0'
DESCRIPTION = 'Builds EPUB books from web novel table of contents pages'
LONG_DESCRIPTION = (
    'Fetches every chapter linked from a web novel table of contents page in parallel, '
    'extracts the chapter text and bundles the chapters, in chapter order, into a single EPUB file.'
)

# Read from requirements.txt, but filter out comments and empty lines
try:
    with open('requirements.txt', encoding='utf-8') as f:
        install_requires = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    install_requires = [
        'beautifulsoup4>=4.9.1',
        'click>=8.0',
        'EbookLib>=0.17',
        'requests>=2.20',
    ]

setup(
    name='novel-epub',
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    packages=find_packages(include=['novel_epub', 'novel_epub.*']),
    install_requires=install_requires,
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-mock>=3.10',
        ],
    },
    entry_points={
        'console_scripts': [
            'novel-epub = novel_epub.cli.main:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: End Users/Desktop',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Topic :: Utilities',
    ],
    python_requires='>=3.8',
)
