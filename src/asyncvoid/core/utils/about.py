import platform


def getVersionInfo() -> dict:
    import nicegui

    import asyncvoid
    from asyncvoid.core.utils.logging import get_log_file_path

    retDict = {}

    retDict["asyncvoid version"] = asyncvoid.__version__
    retDict["NiceGUI version"] = nicegui.__version__

    retDict["Python version"] = platform.python_version()
    retDict["System"] = platform.system()
    retDict["Release"] = platform.release()
    retDict["Machine"] = platform.machine()

    retDict["Log file"] = str(get_log_file_path())

    return retDict
