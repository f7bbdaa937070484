"""Main functions that call the Driver class.

This is the first module called when launching a binary script under the `bin`
directory. It takes care of setting up the `Driver` object used to turn one
input file into its output ntuple.
"""

from .driver import Driver

__all__ = ["run"]


def run(cfg, reader=None, writer=None, progress_callback=None):
    """Process one input file end to end.

    Parameters
    ----------
    cfg : dict
        Full driver configuration
    reader : object, optional
        Reader to use instead of the one described in the configuration
    writer : object, optional
        Writer to use instead of the one described in the configuration
    progress_callback : Callable[[int, int], None], optional
        Function called every `progress_step` events

    Returns
    -------
    PipelineCounters
        Diagnostic counters of the run
    """
    # Prepare the driver
    driver = Driver(
        cfg, reader=reader, writer=writer, progress_callback=progress_callback
    )

    # Run the event loop
    return driver.run()
