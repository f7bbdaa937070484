"""rgeana command line interface.

Main Components
---------------
cli.py : `rge-make-ntuples`, which turns one reconstructed RG-E file into an
         ntuple of identified particles and their kinematics

Usage Examples
--------------
::

    rge-make-ntuples root_io/recon_012933.root
    rge-make-ntuples -f 3 -c -n 10000 root_io/recon_012933.root
    rge-make-ntuples --config rge.yaml --set pipeline.cuts.sf_nsigma=3.0 in.root
"""
