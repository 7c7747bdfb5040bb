from .errors import JobError,ConfigurationError,PropertiesReadError,FileAttachError,StagingUploadError,SubmissionError,StatusParseError
from .client import Client,ServiceError,parse_args
from .webhdfs import WebHDFS
from .properties import PropertiesSource,MappingProperties,FileProperties,RawXMLProperties
from .job import OozieJob,StagingOutcome
__all__ = [
   'JobError','ConfigurationError','PropertiesReadError','FileAttachError',
   'StagingUploadError','SubmissionError','StatusParseError',
   'Client','ServiceError','parse_args',
   'WebHDFS',
   'PropertiesSource','MappingProperties','FileProperties','RawXMLProperties',
   'OozieJob','StagingOutcome']
__version__ = '0.1.0'
