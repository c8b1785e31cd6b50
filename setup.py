# setup.py
from setuptools import setup, find_packages

with open('requirements.txt') as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith('#')]

setup(
    name='race_harvester',
    version='1.0.0',
    packages=find_packages(include=['harvest_service', 'harvest_service.*']),
    description='Scans race_id addressed race pages and recovers race entries as JSON.',
    long_description='Candidate id generation, batched concurrent fetching, page classification and heuristic horse-table extraction.',
    python_requires='>=3.10',
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.4', 'pytest-asyncio>=0.23', 'respx>=0.21'],
    },
    entry_points={
        'console_scripts': [
            'race-harvester=harvest_service.run_harvest:main',
        ],
    },
)
