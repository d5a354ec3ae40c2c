from pathlib import Path
from setuptools import setup

README = (Path(__file__).parent / "README.md").read_text(encoding="utf-8")

setup(
    name='npc-brain',
    version='1.0.0',
    description='Memory-driven, socially emergent speech for non-player characters.',
    long_description=README,
    long_description_content_type='text/markdown',
    author='NPC Brain',
    license='MIT',
    python_requires='>=3.8',
    py_modules=[
        'npcbrain',
        'npcbrain_config',
        'npcbrain_models',
        'npcbrain_utils',
        'npcbrain_storage',
        'npcbrain_environment',
        'npcbrain_memory',
        'npcbrain_correlation',
        'npcbrain_social',
        'npcbrain_proto',
        'npcbrain_tone',
        'npcbrain_response',
        'npcbrain_cognition',
        'npcbrain_commands',
    ],
    entry_points={
        'console_scripts': [
            'npcb=npcbrain:main',
        ],
    },
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Topic :: Games/Entertainment',
    ],
)
