# (c) Copyright IBM Corp. 2025

from os import path

from setuptools import find_packages, setup

pwd = path.abspath(path.dirname(__file__))

# Read VERSION without importing the package
version_ns = {}
with open(path.join(pwd, "src", "porthound", "version.py"), encoding="utf-8") as f:
    exec(f.read(), version_ns)

# Import README.md into long_description
with open(path.join(pwd, "README.md"), encoding="utf-8") as f:
    long_description = f.read()


setup(name='porthound',
      version=version_ns["VERSION"],
      license='MIT',
      description='Discovery of listening TCP ports and their owning processes from /proc',
      package_dir={"": "src"},
      packages=find_packages(where="src", exclude=['tests']),
      long_description=long_description,
      long_description_content_type='text/markdown',
      zip_safe=False,
      python_requires='>=3.8',
      install_requires=['PyYAML>=6.0'],
      extras_require={
          'test': ['pytest>=7.0',
                   'pytest-mock>=3.10'],
      },
      entry_points={
          'console_scripts': ['porthound = porthound.__main__:main'],
      },
      keywords=['ports', 'port-forwarding', 'procfs', 'sockets', 'linux'],
      classifiers=[
          'Development Status :: 5 - Production/Stable',
          'Intended Audience :: Developers',
          'Intended Audience :: System Administrators',
          'License :: OSI Approved :: MIT License',
          'Operating System :: POSIX :: Linux',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Topic :: System :: Networking :: Monitoring',
          'Topic :: Software Development :: Libraries :: Python Modules'])
