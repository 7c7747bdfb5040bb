"""A client library for submitting, starting and polling Oozie jobs

See:

https://oozie.apache.org/docs/4.3.1/WebServicesAPI.html
"""

# Always prefer setuptools over distutils
from setuptools import setup

long_description = """
A client library for submitting, starting and polling Oozie workflow jobs
over the Oozie REST API, staging attached files into HDFS through an HttpFS
gateway before submission.
"""

import re
vdir = __file__[0:__file__.rfind('/')]+'/' if __file__.rfind('/')>=0 else ''
with open(vdir+'pyooziejob/__init__.py', 'rt') as vfile:
   verstrline = vfile.read()
   VSRE = r"^__version__ = ['\"]([^'\"]*)['\"]"
   mo = re.search(VSRE, verstrline, re.M)
   if mo:
      version_info = mo.group(1)
   else:
      raise RuntimeError("Unable to find version string in pyooziejob/__init__.py.")

setup(
    name='pyooziejob',

    # Versions should comply with PEP440.
    version=version_info,

    description='A client library for Oozie jobs with HttpFS file staging',
    long_description=long_description,

    # Choose your license
    license='Apache 2.0',

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Libraries',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
    ],

    keywords='oozie hadoop httpfs webhdfs',

    packages=['pyooziejob'],

    # List run-time dependencies here.  These will be installed by pip when
    # your project is installed.
    install_requires=['requests'],

    # $ pip install -e .[test]
    extras_require={
        'test': ['pytest'],
    },

    include_package_data=True,

    entry_points={
        'console_scripts': [
            'pyooziejob=pyooziejob.__main__:main',
        ],
    },
)
