from setuptools import find_packages, setup

setup(
    name="vpa-recommendation",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.11",
    description="Print Vertical Pod Autoscaler recommendations as a sorted "
                "kubectl style table.",

    packages=find_packages(),

    install_requires=[
        "Click>=8.0,<9.0",
        "toml>=0.10.0,<0.11.0",
        "PyYAML>=6.0,<7.0",
        "tabulate>=0.9.0,<0.10.0",
        "rich>=13.0,<15.0",
        "kubernetes>=12.0",
        "pydantic>=2.0,<3.0",
        "humanize>=4.0,<5.0",
    ],

    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },

    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
    ],
    entry_points={
        'console_scripts': [
            'vpa-recommendation = vpa_recommendation.cli:main',
        ],
    },
)
