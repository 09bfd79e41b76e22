"""
Setup script for Live Network.

Usage:
    pip install -e ".[test]"       # development install
    python setup.py py2app          # build the macOS menu bar app

The py2app bundle lands in the 'dist' folder.
"""
import sys

from setuptools import find_packages, setup

APP = ['live_network.py']
DATA_FILES = [('assets', ['assets/app.png'])] if 'py2app' in sys.argv else []

OPTIONS = {
    'argv_emulation': False,
    'iconfile': 'assets/LiveNetwork.icns',
    'plist': {
        'CFBundleName': 'Live Network',
        'CFBundleDisplayName': 'Live Network',
        'CFBundleIdentifier': 'com.livenetwork.app',
        'CFBundleVersion': '1.0.0',
        'CFBundleShortVersionString': '1.0.0',
        'LSMinimumSystemVersion': '10.14.0',
        'LSUIElement': True,  # Hide dock icon (menu bar app)
        'NSHighResolutionCapable': True,
    },
    'packages': [
        'monitor',
        'config',
        'app',
    ],
    'includes': [
        'rumps',
        'psutil',
        'PIL',
        'PIL.Image',
        'PIL.ImageDraw',
        'objc',
        'Foundation',
        'AppKit',
    ],
    'excludes': [
        'tkinter',
        'pytest',
        'pip',
    ],
    'site_packages': True,
}

py2app_kwargs = {}
if 'py2app' in sys.argv:
    py2app_kwargs = {
        'app': APP,
        'options': {'py2app': OPTIONS},
        'setup_requires': ['py2app'],
    }

setup(
    name='live-network',
    version='1.0.0',
    description='Live download/upload throughput of the active network interface',
    python_requires='>=3.8',
    packages=find_packages(include=['app', 'app.*', 'config', 'monitor']),
    py_modules=['live_network'],
    data_files=DATA_FILES,
    install_requires=[
        'psutil>=5.9.3',
        'Pillow>=9.1',
        'rumps>=0.4.0; sys_platform == "darwin"',
        'pyobjc-framework-Cocoa; sys_platform == "darwin"',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': ['live-network=live_network:main'],
    },
    **py2app_kwargs,
)
