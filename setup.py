from setuptools import setup, find_packages

def read_requirements():
    with open('requirements.txt') as req:
        content = req.read()
        requirements = content.split('\n')
    # Filter out comments and empty lines
    return [req for req in requirements if req and not req.startswith('#')]

setup(
    name='order_tax_middleware',
    version='0.1.0',
    packages=find_packages(exclude=["tests*"]),
    include_package_data=True,
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest>=7.0', 'httpx>=0.24'],
        'postgres': ['psycopg2-binary>=2.9'],
    },
    description='Order intake middleware that applies tax policies and serves processed orders, built on FastAPI',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Framework :: FastAPI",
        "Topic :: Office/Business :: Financial",
    ],
    python_requires='>=3.9',
)
