import setuptools

setuptools.setup(
    name='paramgen',
    version='0.1',
    license='Apache-2.0',
    zip_safe=False,
    packages=setuptools.find_packages(include=['paramgen', 'paramgen.*']),
    fullname='Check Template Parameter Generator',
    python_requires='>=3.9',
    install_requires=[
        'pyyaml',   'rich',      'jinja2',
        'fastjsonschema',        'rapidfuzz'
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['paramgen=paramgen.main:main'],
    },
    description='Generates parameter descriptors, validation and decoding code for check templates from annotated Params dataclasses.',
)
