class JobError(Exception):
   """Base class for all errors raised by the job client"""
   def __init__(self,message):
      super().__init__(message)
      self.message = message

class ConfigurationError(JobError):
   """Raised when a host required for a network call has not been configured"""
   pass

class PropertiesReadError(JobError):
   """Raised when the job properties cannot be turned into configuration XML"""
   def __init__(self,message,path=None):
      super().__init__(message)
      self.path = path

class FileAttachError(JobError):
   """Describes a candidate attachment that was rejected (never raised)"""
   def __init__(self,message,path):
      super().__init__(message)
      self.path = path

class StagingUploadError(JobError):
   """Describes a file that could not be staged (never raised)"""
   def __init__(self,message,local_path,remote_path=None):
      super().__init__(message)
      self.local_path = local_path
      self.remote_path = remote_path

class SubmissionError(JobError):
   """Raised when a submission response does not yield a job id"""
   def __init__(self,message,body=None):
      super().__init__(message)
      self.body = body

class StatusParseError(JobError):
   """Raised when a job information response is not a JSON object"""
   def __init__(self,message,body=None):
      super().__init__(message)
      self.body = body
