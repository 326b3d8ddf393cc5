from setuptools import setup, find_packages

with open("Readme.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="stanza-install-verifier",
    version="1.0.0",
    author="Stanza Install Verifier Team",
    description="Vérification post-installation de l'agent stanza : chemins installés et état du service.",
    long_description=long_description,
    long_description_content_type='text/markdown',
    include_package_data=True,
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.8',
    install_requires=[
        "psutil>=5.9.0",
        "requests>=2.28.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },

    entry_points='''
        [console_scripts]
        stanza-verify=verifier.main:main
    '''
)
