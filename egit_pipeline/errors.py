"""Exception classes for egit_pipeline errors"""

import shlex


def is_sequence(arg):
    return (not hasattr(arg, "strip") and
            (hasattr(arg, "__getitem__") or
             hasattr(arg, "__iter__")))


class PipelineException(Exception):
    pass


class ModuleError(PipelineException):
    pass


class InvalidAttributeError(ModuleError):

    def __init__(self, attribute_name, value, valid_values=None,
                 module_name='<unresolved>'):
        message = "'{0}' is an invalid value for attribute {1}.{2}".format(
            value, module_name, attribute_name)

        if is_sequence(valid_values):
            message += "\nValid values include: {0}".format(
                ', '.join("'{0}'".format(value)
                          for value in valid_values))

        super(InvalidAttributeError, self).__init__(message)


class MissingParameterError(ModuleError):

    def __init__(self, missing, message='Mandatory parameters missing'):
        self.missing = list(missing)
        super(MissingParameterError, self).__init__(message)


class CommandError(PipelineException):

    def __init__(self, args, returncode, output=None):
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        message = "Command '{0}' returned non-zero exit status {1}".format(
            shlex.join(self.args_list), returncode)
        super(CommandError, self).__init__(message)


class BuildTimeout(PipelineException):
    pass


class PublishError(PipelineException):
    pass


class YAMLFormatError(PipelineException):
    pass


class PipelineConfigException(PipelineException):
    pass
