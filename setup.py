from setuptools import setup


setup(name='openaerowake',
    version='0.1.0',
    description='Steady vortex-lattice aerodynamics with free-wake roll-up',
    license='BSD-3',
    packages=[
        'openaerowake',
        'openaerowake.common',
        'openaerowake.geometry',
        'openaerowake.aerodynamics',
        'openaerowake.wake',
        'openaerowake.utils',
    ],
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy>=1.12',
        'openmdao',
        'matplotlib',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=False,
    entry_points="""
    [console_scripts]
    plot_wake=openaerowake.utils.plot_wake:disp_plot
    """
)
