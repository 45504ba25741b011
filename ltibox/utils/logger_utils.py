import logging


def load_logger_settings(log_name=None, file_level='debug', console_level='info'):
    """
    Configure the root logger so that the debug records emitted by the ``ltibox`` modules are shown.

    Args:
        log_name (str (optional)): Path to a log file. If ``None`` only the console handler is added.
        file_level (str): Level of the file handler.
        console_level (str): Level of the console handler.

    Returns:
        logging.Logger: The configured root logger.
    """
    logger = logging.getLogger()  # Modify root logger settings
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if log_name is not None:
        fh = logging.FileHandler(log_name, 'w+')
        fh.setLevel(get_logger_level(file_level))
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(get_logger_level(console_level))
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    return logger


def get_logger_level(level):
    if level == 'debug':
        mode = logging.DEBUG
    elif level == 'info':
        mode = logging.INFO
    elif level == 'warning':
        mode = logging.WARNING
    elif level == 'error':
        mode = logging.ERROR
    else:
        raise NameError('Unknown mode for logging module')

    return mode
