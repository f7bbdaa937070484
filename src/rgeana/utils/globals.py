"""Defines constants shared across the package.

Detector identifiers are fixed constants of the CLAS12 reconstruction.
"""

import math

# Bank names
PARTICLE_BANK = "REC::Particle"
TRACK_BANK = "REC::Track"
CALORIMETER_BANK = "REC::Calorimeter"
CHERENKOV_BANK = "REC::Cherenkov"
SCINTILLATOR_BANK = "REC::Scintillator"
FMT_BANK = "FMT::Tracks"

# Separator between a bank name and a variable name in field identifiers
BANK_SEP = "::"

# Name of the data tree in input/output ROOT files
TREE_NAME = "data"

# Number of CLAS12 sectors
NSECTORS = 6

# Number of coefficients of the sampling fraction curve
NSFPARAMS = 4

# Calorimeter layer IDs
PCAL_LYR = 1
ECIN_LYR = 4
ECOU_LYR = 7

# Detector IDs
FTOF_ID = 12
HTCC_ID = 15
LTCC_ID = 16

# FTOF layer IDs
FTOF1A_LYR = 1
FTOF1B_LYR = 2
FTOF2_LYR = 3

# FMT layer requirements
FMT_MIN_LAYERS = 2
FMT_NLAYERS = 3

# FMT geometry cut constants (cm)
FMTCUT_RMIN = 4.2575
FMTCUT_RMAX = 18.4800
FMTCUT_Z0 = 26.1197
FMTCUT_ANGLE = 57.29

# Electron identification cuts
CHI2NDF_CUT = 15.0
HTCC_NPHE_MIN = 2.0
PCAL_ENERGY_MIN = 0.07
SF_NSIGMA = 3.5

# Forward detector status range (absolute value)
FD_STATUS_MIN = 2000
FD_STATUS_MAX = 4000

# Sentinel meaning that no timing measurement is available
NO_TIMING = math.inf

# Masses (GeV)
ELEC_MASS = 0.000511
MUON_MASS = 0.105658
PION_MASS = 0.139570
PIZERO_MASS = 0.134977
KAON_MASS = 0.493677
KZERO_MASS = 0.497614
ETA_MASS = 0.547853
OMEGA_MASS = 0.782650
PROT_MASS = 0.938272
NEUT_MASS = 0.939565
DEUT_MASS = 1.875613
PHOT_MASS = 0.0

# PDG codes of interest
ELEC_PID = 11
PIONP_PID = 211
PIONM_PID = -211

# Beam energy (GeV) for each known run
BEAM_ENERGIES = {
    11983: 10.3894,  # 50 nA
    12016: 10.3894,  # 250 nA
    12439: 2.1864,  # 15 nA
}

# Beam energy (GeV) used for simulated runs
MC_BEAM_ENERGY = 10.3894

# Simulated runs are numbered 999xxx
MC_RUN_PREFIX = 999
